"""
Entry point for Flask.

Usage (from project root):

    flask --app run.py --debug run

Bootstrap a validator:

    flask --app run.py seed-validator ana@example.com "Ana" secret123 --region MX --sub-region MX_CDMX

"""

from paint_rewards import create_app

# WSGI application object; `flask run` looks for this `app` variable.
app = create_app()

if __name__ == "__main__":
    # Dev only; use `flask run` or a WSGI server otherwise.
    app.run(debug=True)
