#!/usr/bin/env python
"""Script de diagnóstico: simula chamadas completas contra o IvrService.

Roteiros:
1. SSN válido → MAIN_MENU → saldo → encerra
2. Cartão + PIN → serviços → volta → encerra
3. SSN inválido → ERROR → encerra

Uso:
    python scripts/simulate_call.py
"""

import json
import sys
from pathlib import Path

# Adicionar src ao path
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from bank_ivr.application.actions import ActionExecutor
from bank_ivr.application.fsm_engine import FSMEngine
from bank_ivr.application.ivr_service import IvrService
from bank_ivr.application.session import SessionRegistry
from bank_ivr.infra import create_authenticator

SCRIPTS = {
    "ssn_balance": (["1", "123-45-6789", "1", "1", "", "0"], "END_CALL"),
    "card_services": (["2", "5555555555554444", "5678", "1", "9", "0"], "END_CALL"),
    "ssn_failure": (["1", "000-00-0000", "0"], "END_CALL"),
}


def run_script(service, name, inputs, expected_final):
    """Executa um roteiro e retorna True se terminou no estado esperado."""
    print(f"\n📞 Roteiro: {name}")
    response = service.start_session()
    print(f"  - {response.current_state}: {response.prompt_message}")

    for user_input in inputs:
        response = service.process_input(response.session_id, user_input, "DTMF")
        shown = user_input if user_input else "<vazio>"
        print(f"  > {shown:<18} → {response.current_state}: {response.prompt_message}")

    if response.current_state != expected_final:
        print(f"❌ Estado final {response.current_state}, esperado {expected_final}")
        return False

    if service.registry.exists(response.session_id):
        print("❌ Sessão encerrada continua no registro")
        return False

    print("✅ Roteiro concluído")
    return True


def main():
    """Executa bateria de roteiros diagnósticos."""
    print("🔍 DIAGNÓSTICO DO FLUXO IVR\n")
    print("=" * 60)

    executor = ActionExecutor(create_authenticator("memory"), timeout_seconds=5.0)
    service = IvrService(SessionRegistry(), FSMEngine(executor))

    failures = []
    try:
        for name, (inputs, expected) in SCRIPTS.items():
            if not run_script(service, name, inputs, expected):
                failures.append(name)
    finally:
        executor.shutdown()

    print("\n" + "=" * 60)
    if failures:
        print(f"\n❌ FALHAS: {json.dumps(failures)}")
        return 1

    print("\n✅ TODOS OS ROTEIROS PASSARAM")
    return 0


if __name__ == "__main__":
    sys.exit(main())
