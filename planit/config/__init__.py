from planit.config.settings import settings

__all__ = ["settings"]
