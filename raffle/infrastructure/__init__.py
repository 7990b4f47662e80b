"""
Raffle – Infrastructure Layer
===============================
Implementaciones concretas de interfaces.

Este módulo contiene:
- external/: oráculo de aleatoriedad (mock, WebSocket), riel de pagos,
  event bus
- scheduler/: keeper que automatiza checkUpkeep/performUpkeep

REGLA DE DEPENDENCIA:
Esta capa implementa interfaces definidas en application/ports/.

Puede importar de:
- domain/ (entidades, eventos)
- application/ (ports, use cases)
- shared/ (config, logging)
"""
