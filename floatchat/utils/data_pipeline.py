"""
Data Processing Pipeline

This module provides the batch pipeline for processing a directory of ARGO
NetCDF files into the database and the embedding store.
"""

import os
from typing import Any, Dict, List, Optional
import logging
from tqdm import tqdm

from ..database.gateway import OceanDataGateway
from ..ingestion.netcdf_processor import NetCDFProcessor

logger = logging.getLogger(__name__)


class DataProcessor:
    """Main data processing pipeline"""

    def __init__(self, processor: Optional[NetCDFProcessor] = None,
                 gateway: Optional[OceanDataGateway] = None):
        self.gateway = gateway or (processor.gateway if processor else OceanDataGateway())
        self.processor = processor or NetCDFProcessor(self.gateway)

    def process_single_file(self, file_path: str) -> Optional[int]:
        """
        Process a single NetCDF file

        Returns:
            Id of the stored profile, or None if processing failed
        """
        filename = os.path.basename(file_path)
        try:
            return self.processor.process_and_store(filename, file_path)
        except Exception as e:
            logger.error(f"Failed to process {filename}: {e}")
            return None

    def process_directory(self, directory_path: str) -> Dict[str, Any]:
        """
        Process all NetCDF files in a directory

        Returns:
            Summary dictionary with processing results
        """

        if not os.path.isdir(directory_path):
            raise ValueError(f"Directory does not exist: {directory_path}")

        netcdf_files = sorted(
            os.path.join(directory_path, f)
            for f in os.listdir(directory_path)
            if f.endswith('.nc')
        )

        if not netcdf_files:
            logger.warning(f"No NetCDF files found in {directory_path}")

        successful_files = 0
        profile_ids: List[int] = []
        errors: List[str] = []

        for file_path in tqdm(netcdf_files, desc="Processing files", disable=not netcdf_files):
            profile_id = self.process_single_file(file_path)
            if profile_id is None:
                record = self.gateway.get_file(os.path.basename(file_path)) or {}
                errors.append(f"{os.path.basename(file_path)}: {record.get('error_message') or 'unknown error'}")
            else:
                successful_files += 1
                profile_ids.append(profile_id)

        summary = {
            'total_files': len(netcdf_files),
            'successful_files': successful_files,
            'failed_files': len(netcdf_files) - successful_files,
            'profile_ids': profile_ids,
            'errors': errors
        }

        logger.info(f"Processing complete: {successful_files}/{len(netcdf_files)} files stored")
        return summary

    def get_processing_stats(self) -> Dict[str, Any]:
        """Get processing statistics from the database"""

        try:
            return {
                'database_stats': self.gateway.get_statistics(),
                'recent_processing': self.gateway.get_recent_files(limit=10)
            }
        except Exception as e:
            logger.error(f"Failed to get processing stats: {e}")
            return {'error': str(e)}


# Utility functions
def process_argo_files(directory_path: str) -> Dict[str, Any]:
    """Convenience function to process ARGO files"""
    processor = DataProcessor()
    return processor.process_directory(directory_path)


def get_processing_statistics() -> Dict[str, Any]:
    """Get processing statistics"""
    processor = DataProcessor()
    return processor.get_processing_stats()


if __name__ == "__main__":
    import sys
    from ..config import Config
    from ..database.connection import init_database

    logging.basicConfig(level=Config.LOG_LEVEL)

    if len(sys.argv) != 2:
        print("Usage: python -m floatchat.utils.data_pipeline <directory_path>")
        sys.exit(1)

    directory_path = sys.argv[1]
    print(f"Processing ARGO files in: {directory_path}")

    try:
        init_database()
        results = process_argo_files(directory_path)
        print(f"Processing completed:")
        print(f"  Files: {results['successful_files']}/{results['total_files']} successful")

        if results['errors']:
            print(f"  Errors: {len(results['errors'])}")
            for error in results['errors'][:5]:  # Show first 5 errors
                print(f"    - {error}")

    except Exception as e:
        print(f"Fatal error: {e}")
        sys.exit(1)
