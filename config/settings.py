import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# CORS
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

# Gameplay constants
MAX_HEARTS = 5
POINTS_PER_CHALLENGE = 10

# Where the client goes after switching course
LEARN_PATH = "/learn"
