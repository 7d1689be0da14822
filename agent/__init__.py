"""
Agent layer for Photo Poet.

- prompts: prompt templates
- errors: error taxonomy and classifier
- gemini_client: google-genai adapter
- actions: entry points called by the API server
"""
