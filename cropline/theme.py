"""Dark theme QSS stylesheet — slate greys with a blue accent."""

DARK_THEME = """
/* ── Global ─────────────────────────────────────────── */
QWidget {
    background-color: #1f2937;
    color: #e5e7eb;
    font-family: "Inter", "Segoe UI", sans-serif;
    font-size: 13px;
    border: none;
}
QWidget:focus { outline: none; }

/* ── Toolbar ────────────────────────────────────────── */
#ControlBar {
    background-color: #111827;
    border-bottom: 1px solid #374151;
    min-height: 44px;
    max-height: 44px;
}
QPushButton#CtrlBtn {
    height: 32px;
    padding: 0 16px;
    border-radius: 6px;
    border: 1px solid #4b5563;
    background-color: #374151;
    color: #e5e7eb;
    font-weight: 500;
}
QPushButton#CtrlBtn:hover {
    background-color: #4b5563;
    border-color: #6b7280;
}
QSpinBox {
    background-color: #374151;
    border: 1px solid #4b5563;
    border-radius: 6px;
    padding: 2px 8px;
    min-width: 90px;
}
QSpinBox:hover { border-color: #6b7280; }

/* ── Preview ────────────────────────────────────────── */
#PreviewWidget {
    background-color: #000000;
}

/* ── Timeline ───────────────────────────────────────── */
#TimelineArea {
    background-color: #111827;
    border-top: 1px solid #374151;
}
#PlayBtn {
    background-color: #374151;
    color: #e5e7eb;
    border: 1px solid #4b5563;
    border-radius: 8px;
    min-width: 40px; max-width: 40px;
    min-height: 40px; max-height: 40px;
    font-size: 18px;
}
#PlayBtn:hover {
    background-color: #4b5563;
    border-color: #6b7280;
}
#TimeDisplay {
    color: #e5e7eb;
    font-size: 12px;
    font-weight: 500;
    background: transparent;
    font-family: "Inter", "Segoe UI", monospace;
}
#TimeDisplayDim {
    color: #6b7280;
    font-size: 12px;
    font-weight: 500;
    background: transparent;
    font-family: "Inter", "Segoe UI", monospace;
}
QLabel#Muted { color: #6b7280; font-size: 12px; background: transparent; }

/* ── Status bar ─────────────────────────────────────── */
#StatusBar {
    background-color: #111827;
    border-top: 1px solid #374151;
    min-height: 26px;
    max-height: 26px;
}
#StatusLabel {
    color: #9ca3af;
    font-size: 11px;
    background: transparent;
}
"""
