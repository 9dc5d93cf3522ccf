import os
import logging
from prometheus_client import Counter, Gauge, start_http_server

logger = logging.getLogger(__name__)

METRICS_PORT = int(os.getenv('METRICS_PORT', '8001'))

MESSAGES_APPENDED = Counter('studyhub_messages_appended_total', 'Messages appended to conversations')
CONVERSATIONS_CREATED = Counter('studyhub_conversations_created_total', 'Conversations created', ['kind'])
UPLOADS = Counter('studyhub_resource_uploads_total', 'Resource upload attempts', ['outcome'])
RESOURCES_PURGED = Counter('studyhub_resources_purged_total', 'Expired resources removed from the library')
PEERS_ONLINE = Gauge('studyhub_peers_online', 'Peers currently online')


def init_metrics(port: int = METRICS_PORT):
    """Initialize Prometheus metrics server"""
    try:
        start_http_server(port)
        logger.info(f"Prometheus metrics server started on port {port}")
    except Exception as e:
        logger.warning(f'Prometheus start failed: {e}')
