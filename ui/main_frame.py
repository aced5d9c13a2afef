'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
import copy
from pathlib import Path

import wx

from core.log import Log
from core.io_worker import IOWorker
from core.csv_manager import import_into_tree, read_csv_file, write_export
from core.errors import InterchangeError
from core.extract import extract
from core.merge import ImportOptions
from core.storage import ensure_menus, save_menus
from ui.file_dialogs import choose_csv_export_path, choose_csv_to_import, choose_menus_file
from ui.import_dialog import ask_import_options
from ui.menu_tree import MenuTreePanel
from ui.statusbar import StatusBar


class MainFrame(wx.Frame):
    """Main application frame for MenuPad."""
    def __init__(self, menus_path: str, verbosity: int = 0, history: bool = False):
        super().__init__(None, title="MenuPad", size=(700, 600))
        self.SetMinSize((480, 400))

        Log.set_verbosity(verbosity)
        self.io = IOWorker(dispatch=wx.CallAfter)
        self.menus_path = menus_path
        self.history = history
        self.tree = []
        self._import_options = ImportOptions()
        self._pending_read = None

        self._build_menu()
        self.statusbar = StatusBar(self)
        self.SetStatusBar(self.statusbar)
        self._build_body()
        self.Bind(wx.EVT_CLOSE, self.Close)

        self._load(menus_path)

    # ---------------- UI scaffolding ----------------

    def _build_menu(self):
        mb = wx.MenuBar()

        m_file = wx.Menu()
        m_open = m_file.Append(wx.ID_OPEN, "&Open Menus...\tCtrl-O")
        m_save_as = m_file.Append(wx.ID_SAVEAS, "Save Menus &As...")
        m_file.AppendSeparator()
        m_import = m_file.Append(wx.ID_ANY, "&Import CSV...\tCtrl-I")
        m_export = m_file.Append(wx.ID_ANY, "&Export CSV...\tCtrl-E")
        m_file.AppendSeparator()
        m_quit = m_file.Append(wx.ID_EXIT, "E&xit")

        self.Bind(wx.EVT_MENU, self.on_action_open, m_open)
        self.Bind(wx.EVT_MENU, self.on_action_save_as, m_save_as)
        self.Bind(wx.EVT_MENU, self.on_action_import_csv, m_import)
        self.Bind(wx.EVT_MENU, self.on_action_export_csv, m_export)
        self.Bind(wx.EVT_MENU, self.on_quit, m_quit)
        mb.Append(m_file, "&File")
        self.SetMenuBar(mb)

    def _build_body(self):
        root = wx.Panel(self)
        sizer = wx.BoxSizer(wx.VERTICAL)
        self.info = wx.StaticText(root, label="No menus loaded.")
        sizer.Add(self.info, 0, wx.ALL, 8)
        self.tree_panel = MenuTreePanel(root)
        sizer.Add(self.tree_panel, 1, wx.EXPAND)
        root.SetSizer(sizer)

    def _refresh(self):
        self.tree_panel.show(self.tree)
        self.statusbar.set_menu_count(len(extract(self.tree)))
        self.info.SetLabel(f"Menus: {self.menus_path}")
        self.SetTitle(f"MenuPad - {Path(self.menus_path).name}")

    def _show_error(self, title: str, message: str):
        Log.debug(f"{title}: {message}", 0)
        self.SetStatusText(f"{title}: {message}")
        wx.MessageBox(message, title, wx.OK | wx.ICON_ERROR)

    # ---------------- Menus file ----------------

    def _load(self, path: str):
        self.SetStatusText(f"Loading {path}...")
        self.io.submit(ensure_menus, path, callback=self._on_menus_loaded)

    def _on_menus_loaded(self, result, error):
        if error:
            err, tb = error
            Log.debug(tb, 1)
            self._show_error("Open Menus Failed", str(err))
            return
        self.menus_path = result["path"]
        self.tree = result["tree"]
        self._refresh()
        self.SetStatusText("Menus created." if result["created"] else "Menus loaded.")

    def _save(self):
        # The worker gets its own copy; the GUI keeps mutating self.tree.
        self.io.submit(save_menus, self.menus_path, copy.deepcopy(self.tree), callback=self._on_saved)

    def _on_saved(self, result, error):
        if error:
            self._show_error("Save Failed", str(error[0]))

    def _snapshot(self, message: str):
        from core.history import snapshot
        self.io.submit(snapshot, self.menus_path, message, callback=self._on_snapshot)

    def _on_snapshot(self, result, error):
        if error:
            Log.warn(f"Menu snapshot failed: {error[0]}")
        elif result:
            Log.debug(f"Menu snapshot {result[:8]}", 1)

    def on_action_open(self, evt=None):
        path = choose_menus_file(self)
        if path:
            self._load(path)

    def on_action_save_as(self, evt=None):
        path = choose_menus_file(self, save=True)
        if path:
            self.menus_path = path
            self._save()
            self._refresh()

    # ---------------- CSV import / export ----------------

    def on_action_import_csv(self, evt=None):
        path = choose_csv_to_import(self)
        if not path:
            return
        options = ask_import_options(self, self._import_options)
        if options is None:
            return
        self._import_options = options

        if self._pending_read is not None:
            self._pending_read.cancel()
        self.SetStatusText(f"Reading {Path(path).name}...")
        self._pending_read = self.io.submit(
            read_csv_file, path,
            callback=lambda result, error: self._on_csv_read(result, error, path, options),
        )

    def _on_csv_read(self, text, error, csv_path: str, options: ImportOptions):
        self._pending_read = None
        if error:
            self._show_error("CSV Import Failed", str(error[0]))
            return

        try:
            result, report = import_into_tree(self.tree, text, options)
        except InterchangeError as e:
            self._show_error("CSV Import Failed", str(e))
            return

        self._refresh()
        # The worker runs tasks in order: snapshot, save, snapshot.
        if self.history:
            self._snapshot("Before CSV import")
        self._save()
        if self.history:
            self._snapshot(f"Import {report.added_count} menu(s) from {Path(csv_path).name}")

        where = f" into \"{report.target_folder_name}\"" if report.target_folder_name else ""
        lines = [f"{report.added_count} menu(s) imported{where}."]
        if report.skipped_count:
            lines.append(f"{report.skipped_count} duplicate(s) skipped.")
        if result.error_count:
            lines.append(f"{result.error_count} row(s) rejected:")
            lines.extend(result.errors)
        if result.warning_count:
            lines.append(f"{result.warning_count} warning(s):")
            lines.extend(result.warnings)
        self.SetStatusText(lines[0])
        wx.MessageBox("\n".join(lines), "CSV Import", wx.OK | wx.ICON_INFORMATION)

    def on_action_export_csv(self, evt=None):
        path = choose_csv_export_path(self)
        if not path:
            return
        self.SetStatusText(f"Exporting to {path}...")
        self.io.submit(write_export, copy.deepcopy(self.tree), path, callback=self._on_exported)

    def _on_exported(self, result, error):
        if error:
            self._show_error("CSV Export Failed", str(error[0]))
            return
        self.SetStatusText(f"Exported {result.count} menu(s) to {result.filename}.")

    # ---------------- Shutdown ----------------

    def on_quit(self, event):
        self.Close()

    def Close(self, event=None):
        if self._pending_read is not None:
            self._pending_read.cancel()
        self.Destroy()
