"""
This is the main entry point for the DentalCare Streamlit application.

This script handles the following key responsibilities:
- Sets the overall page configuration for the Streamlit app.
- Builds the `DentalCareService` once per server process and hands it to the views.
- Routes the visitor to the login page or to the portal depending on whether
  a session is active.

Run with `streamlit run main.py`.
"""
# main.py

import streamlit as st

from dentalcare import config
from dentalcare.logging_config import setup_logging
from dentalcare.service import DentalCareService
import gui

st.set_page_config(
    page_title="DentalCare",
    page_icon="🦷",
    layout="wide"
)


@st.cache_resource
def get_dentalcare_service():
    """
    Initializes and returns the application's DentalCareService.

    Cached with `st.cache_resource`, so the store is loaded from disk once and
    every rerun observes the same in-memory state.

    Returns:
        DentalCareService: The service shared by all pages.
    """
    setup_logging(config.LOG_LEVEL, config.JSON_LOGS)
    return DentalCareService()


service = get_dentalcare_service()

if 'page' not in st.session_state:
    st.session_state.page = None

if service.user:
    gui.show_main_app(service)
else:
    gui.show_login_form(service)
