'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
from __future__ import annotations

from typing import Optional

import wx

from core.constants import DEFAULT_IMPORT_FOLDER
from core.merge import ImportOptions

__all__ = ["ImportOptionsDialog", "ask_import_options"]

class ImportOptionsDialog(wx.Dialog):
    """Collects ImportOptions before a CSV import."""

    def __init__(self, parent, defaults: ImportOptions):
        super().__init__(parent, title="Import Menus", style=wx.DEFAULT_DIALOG_STYLE)

        self.folder_text = wx.TextCtrl(self, value=defaults.target_folder_name)
        self.create_cb = wx.CheckBox(self, label="Create the folder if it does not exist")
        self.create_cb.SetValue(defaults.create_new_folder)
        self.overwrite_cb = wx.CheckBox(self, label="Import menus whose title already exists")
        self.overwrite_cb.SetValue(defaults.overwrite_existing)
        self.keep_cb = wx.CheckBox(self, label="Recreate folders from the CSV folder column")
        self.keep_cb.SetValue(defaults.keep_folder_paths)

        form = wx.BoxSizer(wx.VERTICAL)
        form.Add(wx.StaticText(self, label="Target folder:"), 0, wx.LEFT | wx.RIGHT | wx.TOP, 10)
        form.Add(self.folder_text, 0, wx.EXPAND | wx.ALL, 10)
        for cb in (self.create_cb, self.overwrite_cb, self.keep_cb):
            form.Add(cb, 0, wx.LEFT | wx.RIGHT | wx.BOTTOM, 10)

        buttons = self.CreateStdDialogButtonSizer(wx.OK | wx.CANCEL)
        form.Add(buttons, 0, wx.EXPAND | wx.ALL, 10)
        self.SetSizerAndFit(form)

    def get_options(self) -> ImportOptions:
        name = self.folder_text.GetValue().strip() or DEFAULT_IMPORT_FOLDER
        return ImportOptions(
            target_folder_name=name,
            create_new_folder=self.create_cb.GetValue(),
            overwrite_existing=self.overwrite_cb.GetValue(),
            keep_folder_paths=self.keep_cb.GetValue(),
        )

def ask_import_options(parent, defaults: Optional[ImportOptions] = None) -> Optional[ImportOptions]:
    with ImportOptionsDialog(parent, defaults or ImportOptions()) as dlg:
        if dlg.ShowModal() != wx.ID_OK:
            return None
        return dlg.get_options()
