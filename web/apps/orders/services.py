"""Orders services built on the generic service orchestrator."""

from apps.core.ports import AuthorizationPort
from apps.core.registry import HelperRegistry
from apps.core.service import Service

from .domain import CreateOrderHelper
from .helpers import CreateOrderHelperV0
from .schemas import CreateOrderInput, CreateOrderOutput
from .usecases import PUBLISH_FAILURE_LOG, CreateOrderPipelineUsecase, CreateOrderUsecase


CREATE_ORDER = "Orders.CreateOrder"


class CreateOrderService(Service[CreateOrderInput, CreateOrderOutput, CreateOrderHelper]):
    """Runs ``Orders.CreateOrder``.

    Args:
        registry: Create-order helpers by key.
        authorization: Authorization port.
        helper_key: Key of the active helper.
        publish_failure_policy: Passed to the usecase, see
            ``CreateOrderUsecase``.
        pipeline: Use ``CreateOrderPipelineUsecase``, letting the helper
            validate and build the order as well.
    """

    def __init__(
        self,
        registry: HelperRegistry[CreateOrderHelper],
        authorization: AuthorizationPort,
        helper_key: str = CreateOrderHelperV0.key,
        publish_failure_policy: str = PUBLISH_FAILURE_LOG,
        pipeline: bool = False,
    ):
        usecase_cls = CreateOrderPipelineUsecase if pipeline else CreateOrderUsecase
        self.publish_failure_policy = publish_failure_policy
        super().__init__(
            name=CREATE_ORDER,
            helper_key=helper_key,
            registry=registry,
            authorization=authorization,
            usecase_factory=lambda helper: usecase_cls(helper, publish_failure_policy),
        )
