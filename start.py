#!/usr/bin/env python3
"""
RetailPOS Startup Script
Launches the API server and the Celery worker that emails receipts.
"""
import signal
import subprocess
import sys
import threading
import time
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from app.core.config import settings
from app.core.redis_client import check_redis_connection


class RetailPOSLauncher:
    """Launcher for RetailPOS application components."""

    def __init__(self):
        self.processes = []
        self.running = True

    def start_api_server(self):
        """Start the FastAPI server."""
        print("🚀 Starting RetailPOS API Server...")
        cmd = [
            sys.executable, "-m", "uvicorn",
            "app.main:app",
            "--host", "0.0.0.0",
            "--port", "8000",
        ]
        cmd += ["--reload"] if settings.debug else ["--workers", "4"]

        process = subprocess.Popen(cmd)
        self.processes.append(("API Server", process))
        print("✅ API Server started on http://localhost:8000")

    def start_celery_worker(self):
        """Start Celery worker for receipt emails."""
        print("🔧 Starting Celery Worker...")
        cmd = [
            sys.executable, "-m", "celery",
            "-A", "app.worker.celery",
            "worker",
            f"--loglevel={settings.log_level.lower()}",
            "--concurrency=2"
        ]

        process = subprocess.Popen(cmd)
        self.processes.append(("Celery Worker", process))
        print("✅ Celery Worker started")

    def check_dependencies(self):
        """Check that Redis is reachable before starting anything."""
        print("🔍 Checking dependencies...")

        if not check_redis_connection():
            print(f"⚠️  Redis is not reachable at {settings.redis_url}")
            return False

        return True

    def monitor_processes(self):
        """Report processes that exit while the launcher is running."""
        reported = set()
        while self.running:
            for name, process in self.processes:
                if process.poll() is not None and name not in reported:
                    print(f"❌ {name} stopped unexpectedly (exit code {process.returncode})")
                    reported.add(name)
            time.sleep(5)

    def signal_handler(self, signum, frame):
        """Handle shutdown signals."""
        print("\n🛑 Shutting down RetailPOS...")
        self.running = False

    def shutdown(self):
        """Shutdown all processes."""
        print("🔄 Stopping all processes...")
        for name, process in self.processes:
            try:
                process.terminate()
                process.wait(timeout=5)
                print(f"✅ {name} stopped")
            except subprocess.TimeoutExpired:
                process.kill()
                print(f"⚠️  {name} force killed")

    def run(self):
        """Run the RetailPOS application."""
        print("🎯 RetailPOS - Billing, Receipts & Sales Forecasting")
        print("=" * 60)

        if not self.check_dependencies():
            print("❌ Dependency check failed. Please fix the issues above.")
            return

        # Setup signal handlers
        signal.signal(signal.SIGINT, self.signal_handler)
        signal.signal(signal.SIGTERM, self.signal_handler)

        try:
            self.start_api_server()
            time.sleep(2)

            self.start_celery_worker()
            time.sleep(2)

            print("\n🎉 RetailPOS is now running!")
            if settings.debug:
                print("📱 API Documentation: http://localhost:8000/docs")
            print("🔍 Health Check: http://localhost:8000/health")
            print("\nPress Ctrl+C to stop all services")

            monitor_thread = threading.Thread(target=self.monitor_processes, daemon=True)
            monitor_thread.start()

            # Keep main thread alive
            while self.running:
                time.sleep(1)

        except KeyboardInterrupt:
            print("\n🛑 Received interrupt signal")
        finally:
            self.shutdown()
            print("👋 RetailPOS stopped")


if __name__ == "__main__":
    launcher = RetailPOSLauncher()
    launcher.run()
