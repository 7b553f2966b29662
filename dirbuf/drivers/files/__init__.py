"""Local filesystem adapter."""

from dirbuf.drivers.files.adapter import FilesAdapter
from dirbuf.drivers.files.lister import DirectoryLister
from dirbuf.drivers.files.symlinks import read_link_data

__all__ = ["DirectoryLister", "FilesAdapter", "read_link_data"]
