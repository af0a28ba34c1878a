"""Undoable editing of shape collections."""

from .base import CommandType, EditCommand, EditError, EditErrorKind
from .commands import (
    AddPort,
    AddScaleVariant,
    AddShape,
    AddVertex,
    ModifyPort,
    MoveVertex,
    RemovePort,
    RemoveScaleVariant,
    RemoveShape,
    RemoveVertex,
    RenameShape,
    SetLauncherRadial,
)
from .history import EditHistory
from .session import EditSession

__all__ = [
    "CommandType",
    "EditCommand",
    "EditError",
    "EditErrorKind",
    "AddPort",
    "AddScaleVariant",
    "AddShape",
    "AddVertex",
    "ModifyPort",
    "MoveVertex",
    "RemovePort",
    "RemoveScaleVariant",
    "RemoveShape",
    "RemoveVertex",
    "RenameShape",
    "SetLauncherRadial",
    "EditHistory",
    "EditSession",
]
