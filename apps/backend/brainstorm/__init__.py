"""SCAMPER brainstorming backend: model text transcoding and idea-graph materialization."""

__version__ = "0.1.0"
