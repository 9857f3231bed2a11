"""Modelos de entrada/saída da conversa IVR (contrato JSON em camelCase)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from bank_ivr.domain.session.states import IvrState


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class IvrRequest(_CamelModel):
    """Entrada do chamador para uma sessão existente."""

    # clientes DTMF legados enviam dígitos como número JSON
    model_config = ConfigDict(coerce_numbers_to_str=True)

    session_id: str | None = None
    user_input: str | None = None
    input_type: str | None = Field(default=None, description="DTMF, VOICE, ...")


class IvrResponse(_CamelModel):
    """Resposta apresentada ao chamador após cada passo."""

    session_id: str | None = None
    current_state: IvrState | None = None
    next_action: str | None = None
    prompt_message: str | None = None
    authenticated: bool = False
    call_ended: bool = False
    error_message: str | None = None

    def to_payload(self) -> dict[str, object]:
        """Serializa em camelCase omitindo campos nulos."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
