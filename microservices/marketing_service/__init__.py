"""
Marketing Service

Book marketing campaign microservice providing:
- Campaign lifecycle management (launch, pause, complete)
- Budget allocation across marketing channels
- Concurrent multi-channel launch (ads, featured deals, email, social)
- Channel performance refresh from the remote platforms
- ROI analytics, campaign reports and author dashboards
- Sale and engagement tracking

Port: 8260
"""

__version__ = "1.0.0"
__service__ = "marketing_service"
