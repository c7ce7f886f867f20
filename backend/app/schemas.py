from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal, Optional, Union

# ----- Raw feeds -----

class WaterLevelPost(BaseModel):
    id: str
    name: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    water_level: Optional[float] = None
    unit: str = "m"
    timestamp: Optional[str] = None
    status: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

class PumpData(BaseModel):
    id: str
    location: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    condition: Optional[str] = None
    # epoch milliseconds or ISO-8601 string
    updated_at: Optional[Union[int, float, str]] = None

class FloodAlert(BaseModel):
    id: str
    level: Literal["info", "warning", "danger", "critical"] = "info"
    isActive: bool = False
    affectedAreas: List[str] = Field(default_factory=list)
    coordinates: Optional[List[float]] = None
    polygonCoordinates: Optional[List[List[List[float]]]] = None
    timestamp: Optional[str] = None

class HistoricalIncident(BaseModel):
    id: str
    type: str = "Other"
    location: str = ""
    date: str
    description: str = ""
    severity: float = 0
    impact_areas: List[str] = Field(default_factory=list)
    duration_hours: Optional[float] = None
    reported_losses: Optional[float] = None
    casualties: Optional[int] = None
    evacuees: Optional[int] = None
    damage_level: Optional[str] = None
    response_time_minutes: Optional[float] = None
    status: Literal["resolved", "ongoing", "monitoring"] = "resolved"

class FloodReport(BaseModel):
    id: str
    location: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    water_level: str = ""
    description: Optional[str] = None
    photo_url: Optional[str] = None
    reporter_name: Optional[str] = None
    reporter_contact: Optional[str] = None
    created_at: str

# ----- Classifications -----

class WaterLevelStatus(BaseModel):
    status: str
    severity: Literal["normal", "alert1", "alert2", "alert3", "danger"]
    color: str

class PumpStatus(BaseModel):
    status: Literal["active", "maintenance", "offline"]
    label: str
    color: str

class SafeZoneVerdict(BaseModel):
    isSafe: bool
    confidence: int
    reason: str

class ReportLevel(BaseModel):
    label: str
    level: Literal["low", "medium", "high"]

# ----- Derived -----

class ChartDataPoint(BaseModel):
    name: str
    label: str
    incidents: int
    severity: float
    resolved: int
    ongoing: int
    losses: float

class DashboardMetrics(BaseModel):
    totalRegions: int
    activeAlerts: int
    floodZones: int
    peopleAtRisk: int
    weatherStations: int
    lastUpdate: str

class PercentChanges(BaseModel):
    totalRegions: int
    activeAlerts: int
    floodZones: int
    peopleAtRisk: int
    weatherStations: int

class MetricsWithHistory(BaseModel):
    current: DashboardMetrics
    previous: DashboardMetrics
    percentChanges: PercentChanges

class IncidentSummary(BaseModel):
    totalIncidents: int
    totalEvacuees: int
    totalLosses: float
    averageSeverity: float
    byType: Dict[str, int]
    byStatus: Dict[str, int]

class ReportStats(BaseModel):
    total: int
    highLevel: int
    mediumLevel: int
    lowLevel: int

class WeatherSnapshot(BaseModel):
    source: Literal["openweather", "openmeteo", "unknown"]
    name: str = ""
    temperature: Optional[float] = None
    description: str = ""
    humidity: Optional[float] = None
    wind_speed: Optional[float] = None
    pressure: Optional[float] = None

# ----- Request bodies -----

class DashboardFeed(BaseModel):
    waterLevelPosts: List[WaterLevelPost] = Field(default_factory=list)
    pumpData: List[PumpData] = Field(default_factory=list)
    alerts: List[FloodAlert] = Field(default_factory=list)

class HistoryFeed(DashboardFeed):
    previous: Optional[DashboardMetrics] = None

class ReportFilterRequest(BaseModel):
    reports: List[FloodReport] = Field(default_factory=list)
    search: str = ""
    level: str = "all"
    limit: Optional[int] = None

class ReportFilterResponse(BaseModel):
    reports: List[FloodReport]
    total: int
    stats: ReportStats
