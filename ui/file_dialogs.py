from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

import wx

from core.csv_manager import export_filename

Pathish = Union[str, Path]

CSV_WILDCARD = "CSV files (*.csv)|*.csv|All files (*.*)|*.*"
JSON_WILDCARD = "Menu files (*.json)|*.json|All files (*.*)|*.*"

__all__ = ["choose_csv_to_import", "choose_csv_export_path", "choose_menus_file"]


def choose_csv_to_import(
    parent: wx.Window | None,
    *,
    default_dir: Pathish | None = None,
) -> Optional[str]:
    """
    Open a file picker for a CSV file to import.
    Returns an absolute path on OK, or None on cancel.
    """
    with wx.FileDialog(
        parent,
        message="Import menus from CSV…",
        wildcard=CSV_WILDCARD,
        style=wx.FD_OPEN | wx.FD_FILE_MUST_EXIST,
        defaultDir=str(default_dir) if default_dir else "",
    ) as dlg:
        if dlg.ShowModal() != wx.ID_OK:
            return None
        return str(Path(dlg.GetPath()).resolve())


def choose_csv_export_path(
    parent: wx.Window | None,
    *,
    default_dir: Pathish | None = None,
) -> Optional[str]:
    """
    Save dialog prefilled with a timestamped export filename.
    """
    with wx.FileDialog(
        parent,
        message="Export menus to CSV…",
        wildcard=CSV_WILDCARD,
        style=wx.FD_SAVE | wx.FD_OVERWRITE_PROMPT,
        defaultDir=str(default_dir) if default_dir else "",
        defaultFile=export_filename(),
    ) as dlg:
        if dlg.ShowModal() != wx.ID_OK:
            return None
        path = Path(dlg.GetPath())
    if path.suffix.lower() != ".csv":
        path = path.with_suffix(".csv")
    return str(path.resolve())


def choose_menus_file(parent: wx.Window | None, *, save: bool = False) -> Optional[str]:
    style = wx.FD_SAVE | wx.FD_OVERWRITE_PROMPT if save else wx.FD_OPEN
    message = "Save menus as…" if save else "Open menus file…"
    with wx.FileDialog(parent, message=message, wildcard=JSON_WILDCARD, style=style) as dlg:
        if dlg.ShowModal() != wx.ID_OK:
            return None
        return str(Path(dlg.GetPath()).resolve())
