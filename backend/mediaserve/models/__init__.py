from mediaserve.models.asset import Asset

__all__ = [
    "Asset",
]
