from inl_qt.adapters.inl_adapter import NONE_ITEM, InlAdapter

__all__ = ["InlAdapter", "NONE_ITEM"]
