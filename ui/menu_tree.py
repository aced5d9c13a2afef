'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
from __future__ import annotations

from typing import List

import wx

from core.tree import Folder, Menu, Node, Separator, Tree

__all__ = ["MenuTreePanel"]

SEPARATOR_LABEL = "────────"

class MenuTreePanel(wx.Panel):
    """
    Read-only view of the menu tree. Selecting a menu shows its prompt.
    Editing and reordering live elsewhere.
    """

    def __init__(self, parent):
        super().__init__(parent)
        self._tree_ctrl = wx.TreeCtrl(
            self, style=wx.TR_DEFAULT_STYLE | wx.TR_HIDE_ROOT | wx.TR_HAS_BUTTONS
        )
        self._detail = wx.TextCtrl(self, style=wx.TE_MULTILINE | wx.TE_READONLY)

        sizer = wx.BoxSizer(wx.VERTICAL)
        sizer.Add(self._tree_ctrl, 2, wx.EXPAND | wx.ALL, 4)
        sizer.Add(self._detail, 1, wx.EXPAND | wx.LEFT | wx.RIGHT | wx.BOTTOM, 4)
        self.SetSizer(sizer)

        self._tree_ctrl.Bind(wx.EVT_TREE_SEL_CHANGED, self._on_select)

    def show(self, tree: Tree):
        self._tree_ctrl.Freeze()
        try:
            self._tree_ctrl.DeleteAllItems()
            root = self._tree_ctrl.AddRoot("menus")
            self._append_items(root, tree)
        finally:
            self._tree_ctrl.Thaw()
        self._detail.SetValue("")

    def _append_items(self, parent_item, items: List[Node]):
        for node in items:
            if isinstance(node, Folder):
                item = self._tree_ctrl.AppendItem(parent_item, node.name)
                self._tree_ctrl.SetItemData(item, node)
                self._append_items(item, node.items)
                if node.expanded:
                    self._tree_ctrl.Expand(item)
            elif isinstance(node, Menu):
                item = self._tree_ctrl.AppendItem(parent_item, f"{node.title}  [{node.context}]")
                self._tree_ctrl.SetItemData(item, node)
            elif isinstance(node, Separator):
                self._tree_ctrl.AppendItem(parent_item, SEPARATOR_LABEL)
            else:
                raise TypeError(f"Not a tree node: {node!r}")

    def _on_select(self, event):
        item = event.GetItem()
        node = self._tree_ctrl.GetItemData(item) if item.IsOk() else None
        if isinstance(node, Menu):
            self._detail.SetValue(node.prompt)
        elif isinstance(node, Folder):
            self._detail.SetValue(node.description)
        else:
            self._detail.SetValue("")
