import os

from school_attendance import create_app

app = create_app()

if __name__ == "__main__":
    # The reloader would start a second process with its own set of timers.
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=app.config["DEBUG"], use_reloader=False)
