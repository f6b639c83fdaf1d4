#!/usr/bin/env python3
"""
Serve the HTTP API with uvicorn (pip install "pii-compliance-monitor[server]").

Configuration is read from the environment / .env file, see MonitorConfig.from_env.
"""

import os

import uvicorn

from pii_compliance_monitor import ComplianceMonitor, MonitorConfig
from pii_compliance_monitor.api import create_app


def main():
    monitor = ComplianceMonitor(MonitorConfig.from_env())
    app = create_app(monitor)
    try:
        uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "3000")))
    finally:
        monitor.close()


if __name__ == "__main__":
    main()
