"""AWS Lambda handler for the Gestalt Lambda Deployer.

Wraps the FastAPI application with Mangum so the deployer runs on AWS
Lambda behind API Gateway. Each invocation builds its own clients and
request log; nothing carries over between invocations.
"""

from mangum import Mangum

from src.config import settings
from src.main import app

# api_gateway_base_path strips the stage name from paths
handler = Mangum(app, lifespan="off", api_gateway_base_path=settings.api_gateway_base_path)


def lambda_handler(event: dict, context: object) -> dict:
    """
    AWS Lambda function handler.

    Args:
        event: API Gateway event; a deployment is a POST to /deployments
        context: Lambda context object with runtime information

    Returns:
        API Gateway response dict with statusCode, headers, and body
    """
    return handler(event, context)
