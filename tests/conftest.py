import pytest

from milvus_sdk import MilvusServiceClient
from milvus_sdk.params import ConnectParam

from mock_server import MockMilvusServer


@pytest.fixture
def mock_server():
    server = MockMilvusServer().start()
    yield server
    server.stop()


@pytest.fixture
def live_client(mock_server):
    """A client connected to the running mock server."""
    client = MilvusServiceClient(ConnectParam(
        host=mock_server.host, port=mock_server.port, connect_timeout=5.0, timeout=2.0))
    yield client
    client.close()
