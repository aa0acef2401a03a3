"""
Startup script for Challan Book
Checks the database connection, prepares indexes and starts the application
"""
import asyncio
import subprocess
import sys

from challanbook.logger import logger


async def prepare_database() -> bool:
    from challanbook.database import connect_to_mongo, close_mongo_connection, ping_database
    from challanbook.indexes import ensure_indexes
    from challanbook.services.challan_service import sync_challan_counter

    try:
        await connect_to_mongo()
        await ping_database()
        print("MongoDB connection successful")
        await ensure_indexes()
        highest = await sync_challan_counter()
        print(f"Challan numbering continues after #{highest}")
        return True
    except Exception as e:
        logger.error(f"Startup check failed: {e}")
        print(f"Database connection failed: {e}")
        print("\nPlease ensure MongoDB is running and MONGODB_URL is set correctly.")
        return False
    finally:
        await close_mongo_connection()


def main():
    print("=" * 60)
    print("CHALLAN BOOK STARTUP")
    print("=" * 60)

    if not asyncio.run(prepare_database()):
        sys.exit(1)

    print("Application will be available at: http://localhost:8000")
    print("Sign in with your Google account.")
    print("=" * 60)

    try:
        subprocess.run([
            sys.executable, "-m", "uvicorn",
            "main:app",
            "--host", "0.0.0.0",
            "--port", "8000",
            "--reload"
        ])
    except KeyboardInterrupt:
        print("\nShutting down Challan Book...")


if __name__ == "__main__":
    main()
