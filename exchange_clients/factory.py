"""
Source factory for creating funding sources by exchange name.
"""

from typing import Iterable, List, Type

from exchange_clients.base_models import UnsupportedSourceError
from exchange_clients.base_source import BaseFundingSource


class FundingSourceFactory:
    """Factory class for creating funding sources."""

    _registered_sources = {
        'binance': 'exchange_clients.ccxt_source.CcxtFundingSource',
        'mexc': 'exchange_clients.ccxt_source.CcxtFundingSource',
    }

    @classmethod
    def create_source(
        cls,
        source_name: str,
        ticker_only: bool = False,
        timeout: int = 10
    ) -> BaseFundingSource:
        """Create a funding source instance.

        Args:
            source_name: Name of the exchange (e.g., 'binance')
            ticker_only: Disable the funding snapshot capability
            timeout: Per-request timeout in seconds

        Raises:
            UnsupportedSourceError: If the source is not registered
        """
        source_name = source_name.lower()

        if source_name not in cls._registered_sources:
            available = ', '.join(cls._registered_sources.keys())
            raise UnsupportedSourceError(
                f"Unsupported source: {source_name}. Available sources: {available}"
            )

        source_class = cls._import_source_class(cls._registered_sources[source_name])
        return source_class(source_name, ticker_only=ticker_only, timeout=timeout)

    @classmethod
    def _import_source_class(cls, class_path: str) -> Type[BaseFundingSource]:
        """Dynamically import a source class from its dotted path."""
        try:
            module_path, class_name = class_path.rsplit('.', 1)
            module = __import__(module_path, fromlist=[class_name])
            source_class = getattr(module, class_name)
        except (ImportError, AttributeError) as e:
            raise ImportError(f"Failed to import source class {class_path}: {e}")

        if not issubclass(source_class, BaseFundingSource):
            raise ValueError(f"Source class {class_name} must inherit from BaseFundingSource")
        return source_class

    @classmethod
    def create_sources(
        cls,
        source_names: Iterable[str],
        ticker_only_sources: Iterable[str] = (),
        timeout: int = 10
    ) -> List[BaseFundingSource]:
        """Create sources in the given order."""
        ticker_only = {name.lower() for name in ticker_only_sources}
        return [
            cls.create_source(name, ticker_only=name.lower() in ticker_only, timeout=timeout)
            for name in source_names
        ]

    @classmethod
    def get_supported_sources(cls) -> List[str]:
        return list(cls._registered_sources.keys())

    @classmethod
    def register_source(cls, name: str, class_path: str) -> None:
        """Register an additional source implementation."""
        cls._registered_sources[name.lower()] = class_path


__all__ = ["FundingSourceFactory"]
