#!/usr/bin/env python3
"""
Startup script for the Retail Incentive API
"""

from dotenv import load_dotenv

# Settings read the environment at import time
load_dotenv()

import uvicorn  # noqa: E402

from app.config import settings  # noqa: E402

if __name__ == "__main__":
    print("✅ Environment variables loaded")
    print("🚀 Starting Retail Incentive API v1.0")
    print("📋 Features:")
    print("  ✅ Sales goal progress (individual / team, weekly / monthly)")
    print("  ✅ Cashier payment-method goals")
    print("  ✅ Bonus payment summary with manager team roll-up")
    print()
    print(f"🌐 Server: http://localhost:{settings.API_PORT}")
    print(f"📖 API Docs: http://localhost:{settings.API_PORT}/docs")
    print()

    uvicorn.run(
        "fastapi_app:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
        access_log=True
    )
