"""FastAPI dependencies shared by the routers."""

from fastapi import Request

from pinecone_provider.services.provider import PineconeProvider


def get_provider(request: Request) -> PineconeProvider:
    """Provider created in the app lifespan."""
    return request.app.state.provider
