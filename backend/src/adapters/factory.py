"""
Adapter factory: resolves a clinic's ``management_system`` to an adapter.

Unknown identifiers fail with ``ConfigurationError`` and never fall back to
the manual adapter.
"""

import logging
from typing import Callable, Dict, List

from pydantic import ValidationError
from sqlalchemy.orm import Session

from adapters.base import ClinicManagementAdapter
from adapters.gesden import GesdenAdapter
from adapters.klinicare import KlinicareAdapter
from adapters.manual import ManualAdapter
from core.exceptions import ConfigurationError
from models import Clinic

logger = logging.getLogger(__name__)

AdapterConstructor = Callable[[Session, Clinic], ClinicManagementAdapter]

_ADAPTER_REGISTRY: Dict[str, AdapterConstructor] = {
    "manual": ManualAdapter,
    "gesden": GesdenAdapter,
    "klinicare": KlinicareAdapter,
}


def register_adapter(management_system: str, constructor: AdapterConstructor) -> None:
    """Register (or replace) the adapter constructor for a management-system key."""
    _ADAPTER_REGISTRY[management_system] = constructor


def unregister_adapter(management_system: str) -> None:
    _ADAPTER_REGISTRY.pop(management_system, None)


def available_systems() -> List[str]:
    return sorted(_ADAPTER_REGISTRY)


def get_adapter(clinic: Clinic, db: Session) -> ClinicManagementAdapter:
    """
    Build the adapter configured for a clinic.

    Raises:
        ConfigurationError: If the clinic's management system is unknown or
            its connection settings are incomplete
    """
    management_system = clinic.management_system
    constructor = _ADAPTER_REGISTRY.get(management_system)
    if constructor is None:
        logger.warning(f"Clinic {clinic.id} has unknown management system '{management_system}'")
        raise ConfigurationError(
            f"Unknown management system '{management_system}'", identifier=management_system
        )

    try:
        return constructor(db, clinic)
    except (ValueError, ValidationError) as e:
        logger.warning(f"Clinic {clinic.id} has invalid {management_system} configuration: {e}")
        raise ConfigurationError(
            f"Invalid configuration for management system '{management_system}': {e}",
            identifier=management_system,
        )
