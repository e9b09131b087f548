"""
Streamlit dashboard for FloatChat

Run with ``streamlit run floatchat/dashboard/app.py``; figures and maps are
built in the ``charts`` and ``maps`` modules.
"""
