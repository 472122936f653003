"""Chargeback API.

Records card-payment chargebacks in DynamoDB and serves them through:
- A standalone FastAPI HTTP server
- An AWS Lambda handler behind API Gateway

Card numbers are masked before they are stored or returned.
"""

__version__ = "1.0.0"
