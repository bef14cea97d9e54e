from .registry import SessionRegistry

__all__ = ['SessionRegistry']
