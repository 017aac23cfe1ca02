"""Qt adapters between the profilebook window and the engine RecordStore.

The window never awaits engine coroutines or touches storage directly. It
emits request signals and renders the StoreSnapshot objects that come back.
"""
