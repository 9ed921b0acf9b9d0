from iam_api.identity.inferencer import CallerInferencer
from iam_api.identity.loader import GatewayTableLoadError, load_gateway_table

__all__ = ["CallerInferencer", "GatewayTableLoadError", "load_gateway_table"]
