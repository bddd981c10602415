from .sword_minder_viewmodel import SwordMinderViewModel  # noqa: F401

__all__ = ["SwordMinderViewModel"]
