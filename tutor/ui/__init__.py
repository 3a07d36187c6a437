"""NiceGUI interface - thin visualization layer over the session store.

Responsibilities:
    - Subject sidebar and active subject indicator
    - Transcript display with live streaming of the current answer
    - Image upload with preview and removal
    - Send control disabled while a request is pending

Holds no chat logic of its own: every user action becomes a SessionStore call.
"""
