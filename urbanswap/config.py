"""
UrbanSwap configuration

Everything is read from the environment once, at import time. Values are
never mutated after startup.
"""

import os

from dotenv import load_dotenv

load_dotenv()

ENV = os.getenv("ENV", "production")
IS_DEVELOPMENT = ENV == "development"

# Database (managed Postgres)
DATABASE_URL = os.getenv("DATABASE_URL")
DB_USER = os.getenv("URBANSWAP_DB_USER")
DB_PASSWORD = os.getenv("URBANSWAP_DB_PASSWORD")
DB_NAME = os.getenv("URBANSWAP_DB_NAME")
DB_HOST = os.getenv("URBANSWAP_DB_HOST")
DB_PORT = os.getenv("URBANSWAP_DB_PORT", "5432")
DB_POOL_MAX = int(os.getenv("URBANSWAP_DB_POOL_MAX", "20"))

# Session tokens
JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "10080"))  # 7 days

# HTTP
CLIENT_URL = os.getenv("CLIENT_URL", "http://localhost:3001")
RATE_LIMIT_STORAGE_URI = os.getenv("RATE_LIMIT_STORAGE_URI", "memory://")

# Listing images
GOOGLE_CLOUD_STORAGE_BUCKET = os.getenv("GOOGLE_CLOUD_STORAGE_BUCKET", "urbanswap-listing-images")
MAX_IMAGE_BYTES = int(os.getenv("MAX_IMAGE_BYTES", "5000000"))

# Points awarded by the marketplace
LISTING_CREATED_POINTS = 20
SWAP_COMPLETED_POINTS = 50

# Password hashing cost (bcrypt log rounds)
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))
