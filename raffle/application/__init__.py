"""
Raffle – Application Layer
============================
Capa de casos de uso y orquestación.

Este módulo contiene:
- use_cases/: entrar, checkUpkeep, coordinador de aleatoriedad, consultas
- ports/: Interfaces hacia infraestructura (oráculo, riel de pagos, eventos)
- services/: FundsLedger (pozo + pago)
- state/: Agregado de ronda en memoria y su lock
- dto/: Data Transfer Objects

REGLA DE DEPENDENCIA:
Esta capa puede importar de:
- domain/ (entidades, servicios, eventos)
- ports/ propios (interfaces hacia infra)

NO puede importar de:
- infrastructure/ (implementaciones concretas)
- presentation/ (API)
"""
