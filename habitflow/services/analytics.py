from habitflow.constants import ANALYTICS_PATH
from habitflow.data import api_client


def fetch():
    payload = api_client.request("GET", ANALYTICS_PATH)
    return payload if isinstance(payload, dict) else {}
