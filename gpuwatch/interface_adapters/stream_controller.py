import asyncio

from fastapi import WebSocket, WebSocketDisconnect

from gpuwatch.shared.logger import Logger
from gpuwatch.use_cases.get_live_snapshot import GetLiveSnapshot

logger = Logger.get(__name__)


class StreamController:
    def __init__(self, get_live_snapshot: GetLiveSnapshot, push_interval: float = 1.0):
        self.get_live_snapshot = get_live_snapshot
        self.push_interval = push_interval

    async def stream(self, websocket: WebSocket) -> None:
        """Push the combined snapshot every push_interval until the first failed send."""
        await websocket.accept()
        logger.info("WebSocket client connected")
        try:
            while True:
                await websocket.send_json(self.get_live_snapshot.execute())
                await asyncio.sleep(self.push_interval)
        except WebSocketDisconnect:
            logger.info("WebSocket client disconnected")
        except Exception as e:
            logger.warning(f"WebSocket stream closed after send failure: {e}")
