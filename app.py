# app.py
'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
import sys
import traceback
import wx

from core.log import Log

def on_exception(exc_type, exc_value, exc_traceback):
    """Show unhandled exceptions on the status bar and in the log instead of silent failure."""
    if issubclass(exc_type, KeyboardInterrupt):
        # Allow Ctrl+C to work normally
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return

    tb_text = ''.join(traceback.format_exception(exc_type, exc_value, exc_traceback))
    error_message = f"!ERROR! Unhandled Exception:\n{tb_text}"
    Log.debug(error_message, 0)

    app = wx.GetApp()
    main_frame = app.GetTopWindow() if app else None
    if main_frame is not None and hasattr(main_frame, 'SetStatusText'):
        main_frame.SetStatusText(error_message.splitlines()[-1])
    else:
        print(error_message, file=sys.stderr)

if tuple(getattr(wx, 'VERSION', (0,0,0))[:3]) < (4, 2, 0):
    raise RuntimeError(f"MenuPad requires wxPython ≥ 4.2.0; found {wx.__version__}")

from ui.main_frame import MainFrame

def main(menus_path: str, verbosity: int = 0, stdexp: bool = False, history: bool = False):
    # Install the exception handler
    if not stdexp:
        sys.excepthook = on_exception

    app = wx.App(False)

    frame = MainFrame(menus_path, verbosity=verbosity, history=history)
    frame.Show()

    return app.MainLoop()
