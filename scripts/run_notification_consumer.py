"""
Run the Notification Consumer

Standalone process consuming the notification stream, for deployments that
set NOTIFICATION_CONSUMER_ENABLED=false on the API instances.

Usage:
    python scripts/run_notification_consumer.py
"""

import asyncio
import sys
from pathlib import Path

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from app.modules.notifications.consumer import main

if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("Notification consumer interrupted")
