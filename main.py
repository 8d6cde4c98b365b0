import uvicorn

from razorpay_relay.config import HOST, PORT
from razorpay_relay.main import app


if __name__ == "__main__":
    # uvicorn drains connections and runs the lifespan shutdown on SIGINT/SIGTERM
    uvicorn.run(app, host=HOST, port=PORT)
