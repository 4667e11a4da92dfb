"""AI Music Studio.

Backend service for an AI-assisted music generation application.

High-level architecture
-----------------------

The service sits between the end-user UI and a handful of third-party
generation providers:

- **Generation jobs**: a request to create music is recorded as a
  ``generation_jobs`` row, forwarded to a provider (Suno, Mureka, or the
  offline ``test`` provider) and tracked until a track is produced.
- **Provider feedback**: completion is observed either by polling the
  provider's status endpoint or by receiving the provider's webhook callback.
- **Progress delivery**: clients follow a job by polling the status endpoint
  (see ``aimusic_studio.client.status_poller``) or over a WebSocket.

Core subpackages
----------------

- ``aimusic_studio.core``: logging, monitoring, database entities and I/O
  schemas.
- ``aimusic_studio.providers``: thin HTTP clients for Suno and Mureka.
- ``aimusic_studio.services``: job lifecycle, callbacks, prompt enhancement,
  health monitoring and the realtime progress hub.
- ``aimusic_studio.client``: client-side status polling with backoff.
- ``aimusic_studio.server``: FastAPI application and routers.
"""

__version__ = "0.1.0"
