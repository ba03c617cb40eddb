"""MyTube audio service: on-demand extraction and delivery of cached audio."""
