"""Models de sessão: Session.

Session é a unidade atômica de interação com um chamador.
- Uma sessão = um session_id único
- Uma sessão = exatamente um estado autoritativo
- Mutada apenas pelo commit do FSMEngine, sob o lock da própria sessão
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from bank_ivr.domain.credentials import Credentials
from bank_ivr.domain.session.states import INITIAL_STATE, IvrState


@dataclass(eq=False)
class Session:
    """Estado completo de uma chamada IVR (somente em memória).

    Responsabilidades:
    - Guardar o estado corrente do FSM
    - Manter as credenciais em andamento
    - Registrar última atividade (expulsão por inatividade)
    - Expor o lock que serializa eventos da mesma sessão
    """

    session_id: str
    current_state: IvrState = INITIAL_STATE
    credentials: Credentials = field(default_factory=Credentials)
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)
    last_activity: float = field(default=0.0)
    version: int = 0
    ended: bool = False
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def __post_init__(self) -> None:
        if not self.last_activity:
            self.last_activity = self.clock()

    def touch(self) -> None:
        """Marca atividade agora."""
        self.last_activity = self.clock()

    def idle_for(self) -> float:
        """Segundos desde a última atividade."""
        return self.clock() - self.last_activity

    def commit(self, new_state: IvrState) -> None:
        """Grava o estado resolvido. Chamar apenas com `lock` adquirido."""
        self.current_state = new_state
        self.version += 1
        self.touch()
