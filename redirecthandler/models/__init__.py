from redirecthandler.models.redirect_model import RedirectModel, RedirectType


__all__ = [
    'RedirectModel',
    'RedirectType',
]
