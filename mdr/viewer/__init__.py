"""Viewer modes, per-frame layout, state, and input dispatch."""
