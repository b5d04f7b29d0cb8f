"""HTTP server package — FastAPI front end for the SRT pipeline.

WHY: The original tool is a web page; scripts and other services want the
same conversion over HTTP without a browser.

RULES:
- Importing this package must not start a server
"""
