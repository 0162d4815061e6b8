from mdow.models.paste_model import PasteModel


__all__ = ['PasteModel']
