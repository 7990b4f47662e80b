"""
Dependency Injection Container.

Único lugar donde se crean dependencias concretas: oráculo, riel de
pagos, event bus, el agregado de ronda y los casos de uso que lo
comparten.

Todas las instancias son singletons perezosos: los casos de uso DEBEN
compartir el mismo RoundStateManager (y por tanto el mismo lock).
"""

from dataclasses import dataclass, field
from typing import Optional, Any

from raffle.application.ports.event_publisher import IEventPublisher
from raffle.application.ports.payout_rail import IPayoutRail
from raffle.application.ports.randomness_oracle import (
    IRandomnessOracle,
    RandomnessRequestConfig,
)
from raffle.application.services.funds_ledger import FundsLedger
from raffle.application.state.round_state import RoundStateManager
from raffle.application.use_cases.check_upkeep_usecase import CheckUpkeepUseCase
from raffle.application.use_cases.enter_raffle_usecase import EnterRaffleUseCase
from raffle.application.use_cases.raffle_status_usecase import GetRaffleStatusUseCase
from raffle.application.use_cases.randomness_coordinator import RandomnessCoordinator
from raffle.domain.entities.round import Round
from raffle.domain.services.upkeep_evaluator import UpkeepEvaluator
from raffle.shared.config.settings import Settings


@dataclass
class Container:
    """
    Contenedor de Inyección de Dependencias.

    Las capas internas dependen de abstracciones (ports); aquí se
    decide qué implementación concreta recibe cada una.
    """

    settings: Settings = field(default_factory=Settings)

    # Ports
    _event_publisher: Optional[IEventPublisher] = None
    _payout_rail: Optional[IPayoutRail] = None
    _randomness_oracle: Optional[IRandomnessOracle] = None

    # Estado y servicios
    _upkeep_evaluator: Optional[UpkeepEvaluator] = None
    _round_state: Optional[RoundStateManager] = None

    # Use cases
    _enter_raffle: Optional[EnterRaffleUseCase] = None
    _check_upkeep: Optional[CheckUpkeepUseCase] = None
    _coordinator: Optional[RandomnessCoordinator] = None
    _raffle_status: Optional[GetRaffleStatusUseCase] = None

    # Colaboradores externos
    _keeper: Optional[Any] = None
    _ws_manager: Optional[Any] = None

    # ==================== Ports ====================

    @property
    def event_publisher(self) -> IEventPublisher:
        if self._event_publisher is None:
            from raffle.infrastructure.external.event_bus_adapter import EventBusAdapter
            self._event_publisher = EventBusAdapter(self.settings.event_bus_max_queue_size)
        return self._event_publisher

    @property
    def payout_rail(self) -> IPayoutRail:
        if self._payout_rail is None:
            from raffle.infrastructure.external.in_memory_payout_rail import InMemoryPayoutRail
            self._payout_rail = InMemoryPayoutRail()
        return self._payout_rail

    @property
    def randomness_oracle(self) -> IRandomnessOracle:
        """Oráculo según settings.oracle_backend (mock | websocket)."""
        if self._randomness_oracle is None:
            if self.settings.oracle_backend == "websocket":
                from raffle.infrastructure.external.websocket_oracle import WebSocketRandomnessOracle
                self._randomness_oracle = WebSocketRandomnessOracle(
                    url=self.settings.oracle_ws_url,
                    request_timeout=self.settings.oracle_request_timeout_seconds,
                    reconnect_base_delay=self.settings.oracle_reconnect_base_delay,
                    reconnect_max_delay=self.settings.oracle_reconnect_max_delay,
                )
            else:
                from raffle.infrastructure.external.mock_randomness_oracle import MockRandomnessOracle
                self._randomness_oracle = MockRandomnessOracle(
                    auto_fulfill_delay=self.settings.mock_fulfill_delay_seconds,
                )
        return self._randomness_oracle

    @property
    def request_config(self) -> RandomnessRequestConfig:
        s = self.settings
        return RandomnessRequestConfig(
            key_hash=s.oracle_key_hash,
            subscription_id=s.oracle_subscription_id,
            request_confirmations=s.oracle_request_confirmations,
            callback_gas_limit=s.oracle_callback_gas_limit,
            num_words=s.oracle_num_words,
        )

    # ==================== Estado ====================

    @property
    def upkeep_evaluator(self) -> UpkeepEvaluator:
        if self._upkeep_evaluator is None:
            self._upkeep_evaluator = UpkeepEvaluator()
        return self._upkeep_evaluator

    @property
    def round_state(self) -> RoundStateManager:
        """La única ronda viva del sistema."""
        if self._round_state is None:
            ledger = FundsLedger(self.payout_rail, self.settings.payout_timeout_seconds)
            round_ = Round(
                entry_fee=self.settings.entry_fee,
                interval_seconds=self.settings.interval_seconds,
            )
            self._round_state = RoundStateManager(round_, ledger)
        return self._round_state

    # ==================== Use Cases ====================

    @property
    def enter_raffle(self) -> EnterRaffleUseCase:
        if self._enter_raffle is None:
            self._enter_raffle = EnterRaffleUseCase(self.round_state, self.event_publisher)
        return self._enter_raffle

    @property
    def check_upkeep(self) -> CheckUpkeepUseCase:
        if self._check_upkeep is None:
            self._check_upkeep = CheckUpkeepUseCase(self.round_state, self.upkeep_evaluator)
        return self._check_upkeep

    @property
    def coordinator(self) -> RandomnessCoordinator:
        """Coordinador + registro de su callback en el oráculo."""
        if self._coordinator is None:
            self._coordinator = RandomnessCoordinator(
                state=self.round_state,
                oracle=self.randomness_oracle,
                event_publisher=self.event_publisher,
                request_config=self.request_config,
                evaluator=self.upkeep_evaluator,
                request_timeout=self.settings.oracle_request_timeout_seconds,
            )
            self.randomness_oracle.bind(self._coordinator.on_randomness_ready)
        return self._coordinator

    @property
    def raffle_status(self) -> GetRaffleStatusUseCase:
        if self._raffle_status is None:
            self._raffle_status = GetRaffleStatusUseCase(self.round_state)
        return self._raffle_status

    # ==================== Colaboradores ====================

    @property
    def keeper(self):
        if self._keeper is None:
            from raffle.infrastructure.scheduler.upkeep_keeper import UpkeepKeeper
            self._keeper = UpkeepKeeper(
                check_upkeep=self.check_upkeep,
                coordinator=self.coordinator,
                poll_interval=self.settings.keeper_poll_interval_seconds,
            )
        return self._keeper

    @property
    def ws_manager(self):
        if self._ws_manager is None:
            from raffle.presentation.websocket.websocket_manager import WebSocketManager
            self._ws_manager = WebSocketManager(self.event_publisher)
        return self._ws_manager

    # ==================== Lifecycle ====================

    def reset(self) -> None:
        """Resetea todas las instancias (útil para tests)."""
        self._event_publisher = None
        self._payout_rail = None
        self._randomness_oracle = None
        self._upkeep_evaluator = None
        self._round_state = None
        self._enter_raffle = None
        self._check_upkeep = None
        self._coordinator = None
        self._raffle_status = None
        self._keeper = None
        self._ws_manager = None

    def override(self, name: str, instance: Any) -> None:
        """
        Override una dependencia (útil para tests con fakes).

        Args:
            name: Nombre de la dependencia (ej: 'payout_rail')
            instance: Instancia a usar
        """
        attr_name = f"_{name}"
        if hasattr(self, attr_name):
            setattr(self, attr_name, instance)
        else:
            raise ValueError(f"Unknown dependency: {name}")


# ==================== Global Container ====================

_container: Optional[Container] = None


def get_container() -> Container:
    global _container
    if _container is None:
        _container = Container()
    return _container


def reset_container() -> None:
    global _container
    if _container is not None:
        _container.reset()
    _container = None


def init_container(settings: Optional[Settings] = None) -> Container:
    """Inicializa el contenedor global con configuración específica."""
    global _container
    if settings is None:
        settings = Settings()
    _container = Container(settings=settings)
    return _container


def create_test_container(settings: Optional[Settings] = None, **overrides) -> Container:
    """
    Crea un contenedor aislado con dependencias sustituidas.

    Ejemplo:
        container = create_test_container(payout_rail=FailingRail())
    """
    container = Container(settings=settings or Settings())
    for name, instance in overrides.items():
        container.override(name, instance)
    return container
