################################################################################################
'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.

This file holds the code for the main window's status bar and its log viewer.
'''
################################################################################################

import wx

from core.log import Log

################################################################################################
class LogDialog(wx.Dialog):
    """Monospace, read-only dump of the in-memory log."""
    SIZE = (720, 360)

    def __init__(self, parent):
        super().__init__(parent, title="MenuPad Log", size=self.SIZE,
                         style=wx.DEFAULT_DIALOG_STYLE | wx.RESIZE_BORDER)
        self.text = wx.TextCtrl(self, style=wx.TE_MULTILINE | wx.TE_READONLY | wx.HSCROLL)
        self.text.SetFont(wx.Font(wx.FontInfo(9).Family(wx.FONTFAMILY_TELETYPE)))
        self.text.SetValue("\n".join(f"[{ts}] {msg}" for ts, msg in Log.get()))
        self.text.SetInsertionPointEnd()

        box_main = wx.BoxSizer(wx.VERTICAL)
        box_main.Add(self.text, 1, wx.EXPAND | wx.ALL, 4)
        box_main.Add(self.CreateStdDialogButtonSizer(wx.CLOSE), 0, wx.EXPAND | wx.ALL, 4)
        self.SetSizer(box_main)
        self.Bind(wx.EVT_BUTTON, lambda evt: self.EndModal(wx.ID_CLOSE), id=wx.ID_CLOSE)

################################################################################################
class StatusBar(wx.StatusBar):
    """Field 0: last message. Field 1: menu count. Right-click for the log."""

    def __init__(self, parent):
        super(StatusBar, self).__init__(parent)
        self.SetFieldsCount(2)
        self.SetStatusWidths([-1, 160])
        self.Bind(wx.EVT_RIGHT_DOWN, self.OnRightDown)
        Log.add("Create StatusBar")

    def set_menu_count(self, count: int):
        self.SetStatusText(f"{count} menu(s)", 1)

    def OnRightDown(self, event):
        """Handle right-click to show context menu with log options."""
        menu = wx.Menu()

        item_show_log = menu.Append(wx.ID_ANY, "Show Log")
        menu.AppendSeparator()
        item_save = menu.Append(wx.ID_SAVE, "Save Log to File...")
        item_clear = menu.Append(wx.ID_CLEAR, "Clear Log")

        self.Bind(wx.EVT_MENU, self.OnShowLog, item_show_log)
        self.Bind(wx.EVT_MENU, self.OnSaveLogToFile, item_save)
        self.Bind(wx.EVT_MENU, self.OnClearLog, item_clear)

        self.PopupMenu(menu)
        menu.Destroy()

    def OnShowLog(self, event):
        with LogDialog(self.GetParent()) as dlg:
            dlg.ShowModal()

    def OnSaveLogToFile(self, event):
        """Save log to a text file."""
        with wx.FileDialog(
            self,
            "Save Log to file",
            wildcard="Text files (*.txt)|*.txt|Log files (*.log)|*.log|All files (*.*)|*.*",
            style=wx.FD_SAVE | wx.FD_OVERWRITE_PROMPT
        ) as fileDialog:
            if fileDialog.ShowModal() == wx.ID_CANCEL:
                return

            path = fileDialog.GetPath()
            Log.write_to_file(path)
            self.SetStatusText(f"Log saved to: {path}")

    def OnClearLog(self, event):
        """Clear the log after confirmation."""
        result = wx.MessageBox(
            "Are you sure you want to clear the entire log?",
            "Clear Log",
            wx.YES_NO | wx.ICON_QUESTION
        )
        if result == wx.YES:
            Log.clear()
            self.SetStatusText("Log cleared")

################################################################################################
