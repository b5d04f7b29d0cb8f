"""Package entry point for ``python -m groq_srt``.

WHY: Users run the converter as ``python -m groq_srt talk.mp3`` for CLI
mode, or ``python -m groq_srt --serve`` to start the HTTP server.

HOW: Checks sys.argv for the ``--serve`` flag. If present, starts the
FastAPI app under uvicorn. Otherwise, delegates to the CLI's main().
"""

import sys

if __name__ == "__main__":
    if "--serve" in sys.argv:
        from groq_srt.server.app import run_api
        run_api()
    else:
        from groq_srt.cli import main
        main()
