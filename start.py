# start.py
"""
后端启动脚本
python start.py
HOST / PORT / RELOAD 可以用环境变量覆盖
"""
import os

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "5000")),
        reload=os.getenv("RELOAD", "0") == "1",
        workers=1,
        loop="asyncio",
        timeout_keep_alive=30,
        limit_concurrency=200,
        limit_max_requests=5000,
        backlog=2048,
    )
