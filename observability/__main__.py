"""Phoenix server launcher for gateway traces.

Run with: python -m observability
Then start the gateway with --tracing.
"""

import phoenix as px


def main():
    """Launch a local Phoenix UI that collects gateway spans."""
    print("Starting Phoenix observability server...")
    print("Dashboard will be available at: http://localhost:6006")
    print("Start the gateway with --tracing to send spans here")
    print("Press Ctrl+C to stop the server")

    session = px.launch_app()
    print(f"Collector endpoint: {session.url}v1/traces")
    input()


if __name__ == "__main__":
    main()
