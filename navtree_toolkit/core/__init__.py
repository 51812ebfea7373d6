"""Framework-agnostic core: tree model, drag-and-drop engine and services."""
