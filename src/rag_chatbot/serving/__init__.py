"""
Serving — FastAPI application for the chatbot.

Exposes health, document processing, document listing and chat endpoints
to the browser frontend.
"""
