"""Settings endpoints: persistence toggle and seed reset."""

from typing import Annotated

from fastapi import APIRouter, Body

from payroll_admin.api.dependencies import EngineDep, StoreDep
from payroll_admin.api.schemas import ResetRequest, SettingsResponse
from payroll_admin.calculators.engine import PayrollEngine
from payroll_admin.services.store import Store

router = APIRouter(prefix="/settings", tags=["settings"])


def _settings_response(store: Store, engine: PayrollEngine) -> SettingsResponse:
    return SettingsResponse(
        use_local_storage=store.get_state().use_local_storage,
        state_key=store.state_key,
        tax_rate=engine.tax_rate,
        pension_rate=engine.pension_rate,
    )


@router.get("", response_model=SettingsResponse)
def get_settings(store: StoreDep, engine: EngineDep) -> SettingsResponse:
    return _settings_response(store, engine)


@router.post("/toggle-persistence", response_model=SettingsResponse)
def toggle_persistence(store: StoreDep, engine: EngineDep) -> SettingsResponse:
    """Flip persistence. Turning it off drops the saved state document."""
    store.toggle_local_storage()
    return _settings_response(store, engine)


@router.post("/reset", response_model=SettingsResponse)
def reset_data(
    store: StoreDep,
    engine: EngineDep,
    payload: Annotated[ResetRequest | None, Body()] = None,
) -> SettingsResponse:
    """Replace all data with freshly generated seed data."""
    store.reset_to_seed(payload.seed if payload else None)
    return _settings_response(store, engine)
