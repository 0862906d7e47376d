import os
import redis
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Initialize Redis client. Connections are opened lazily on first command.
redis_client = redis.Redis(
    host=os.getenv("REDIS_HOST", "localhost"),
    port=int(os.getenv("REDIS_PORT", 6379)),
    db=int(os.getenv("REDIS_DB", 0)),
    decode_responses=True  # Ensures output is returned as strings
)
