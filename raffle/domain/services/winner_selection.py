"""
Raffle – Domain Service: Winner Selection
===========================================
Selección del ganador como función explícita y auditable:

    winner_index = random_value mod entrant_count

Determinista: con el mismo random_value y el mismo número de
participantes cualquiera puede recomputar el resultado.

El sorteo es tan justo como uniforme e incorruptible sea la fuente
de aleatoriedad externa. Esa frontera de confianza pertenece al
oráculo, no a este módulo.
"""

from __future__ import annotations

from raffle.domain.exceptions.domain_errors import InvalidArgument


def select_winner_index(random_value: int, entrant_count: int) -> int:
    """Índice ganador para un valor aleatorio y un número de boletos."""
    if not isinstance(random_value, int) or isinstance(random_value, bool) or random_value < 0:
        raise InvalidArgument("random_value debe ser un entero no negativo", "random_value", random_value)
    if entrant_count <= 0:
        raise InvalidArgument("no hay participantes para sortear", "entrant_count", entrant_count)
    return random_value % entrant_count
